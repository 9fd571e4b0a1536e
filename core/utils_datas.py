"""
Utilitários de datas e horários.
Usa o timezone da igreja (APP_TIMEZONE, default America/Sao_Paulo).
"""
import os
from datetime import datetime, date, time
from typing import Optional, Union
import re

import pytz
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

TZ = pytz.timezone(os.getenv("APP_TIMEZONE", "America/Sao_Paulo"))

MESES_ABREV = {
    1: "jan", 2: "fev", 3: "mar", 4: "abr", 5: "mai", 6: "jun",
    7: "jul", 8: "ago", 9: "set", 10: "out", 11: "nov", 12: "dez",
}

# HH:MM ou HH:MM:SS (formato do formulário e da coluna time do banco)
_HORA_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def hoje_local() -> date:
    """Retorna a data de hoje no fuso da igreja."""
    return datetime.now(TZ).date()


def para_data(valor: Union[date, datetime, str, None]) -> Optional[date]:
    """
    Converte date, datetime ou string ISO (YYYY-MM-DD) em date.

    None e string vazia viram None. Qualquer outro valor que não seja
    uma data levanta ValueError.
    """
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    if isinstance(valor, str):
        try:
            return isoparse(valor.strip()).date()
        except ValueError:
            raise ValueError(f"Data inválida: {valor!r}")
    raise ValueError(f"Data inválida: {valor!r}")


def para_hora(valor: Union[time, str]) -> time:
    """
    Converte 'HH:MM', 'HH:MM:SS' ou time em time.

    Raises:
        ValueError: Se o horário não puder ser interpretado
    """
    if isinstance(valor, time):
        return valor
    if not isinstance(valor, str):
        raise ValueError(f"Horário inválido: {valor!r}")

    match = _HORA_RE.match(valor.strip())
    if not match:
        raise ValueError(f"Horário inválido: {valor!r}")
    hora, minuto, segundo = match.groups()
    try:
        return time(int(hora), int(minuto), int(segundo or 0))
    except ValueError:
        raise ValueError(f"Horário inválido: {valor!r}")


def inicio_do_mes(d: date) -> date:
    return d.replace(day=1)


def intervalo_do_mes(d: date):
    """Retorna (primeiro_dia, ultimo_dia) do mês de d."""
    inicio = inicio_do_mes(d)
    fim = inicio + relativedelta(months=1, days=-1)
    return inicio, fim


def rotulo_mes(d: date) -> str:
    """Rótulo curto do mês, ex: 'out/26'."""
    return f"{MESES_ABREV[d.month]}/{d.strftime('%y')}"


def formatar_hora(t: time) -> str:
    """'HH:MM', ou 'HH:MM:SS' quando há segundos."""
    return t.strftime('%H:%M:%S' if t.second else '%H:%M')
