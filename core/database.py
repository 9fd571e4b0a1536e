"""
Conexão com o MongoDB.

Localização: core/database.py

Centraliza a criação do MongoClient para que todos os repositories
compartilhem a mesma conexão. A configuração vem de variáveis de ambiente
(carregadas de um .env quando existir):

- MONGO_URI: URI completa de conexão (prioritária)
- MONGO_USER / MONGO_PASS: credenciais do cluster Atlas (usadas se não houver MONGO_URI)
- MONGO_DB_NAME: nome do banco (default: igreja360)
"""
import os
import logging
import urllib.parse

from dotenv import load_dotenv, find_dotenv
from pymongo import MongoClient
from pymongo.database import Database

load_dotenv(find_dotenv())

logger = logging.getLogger(__name__)

ATLAS_URI = "mongodb+srv://%s:%s@cluster0.mongodb.net/?retryWrites=true&w=majority&appName=Igreja360"

_client = None


def _build_uri() -> str:
    uri = os.getenv('MONGO_URI')
    if uri:
        return uri

    user = os.getenv('MONGO_USER')
    password = os.getenv('MONGO_PASS')
    if not user or not password:
        raise RuntimeError("MONGO_URI ou MONGO_USER/MONGO_PASS não configurados")

    return ATLAS_URI % (urllib.parse.quote_plus(user), urllib.parse.quote_plus(password))


def get_client() -> MongoClient:
    """Retorna o MongoClient compartilhado, criando-o na primeira chamada."""
    global _client
    if _client is None:
        _client = MongoClient(_build_uri())
        logger.info("[DATABASE] Conexão MongoDB criada")
    return _client


def get_database() -> Database:
    """
    Retorna o banco de dados da aplicação.

    Returns:
        Database do pymongo configurado por MONGO_DB_NAME
    """
    db_name = os.getenv('MONGO_DB_NAME', 'igreja360')
    return get_client()[db_name]
