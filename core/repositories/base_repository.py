"""
Repository base para MongoDB.

Localização: core/repositories/base_repository.py

Repository base estendido pelos repositories de transações, escalas e
auditoria. O handle do banco pode ser injetado (útil em testes); sem ele,
usa a conexão compartilhada de core.database.
"""
from typing import Optional, Dict, Any, List
from bson import ObjectId
from bson.errors import InvalidId


class BaseRepository:
    """
    Repository base com operações CRUD sobre uma collection.

    Exemplo de uso:
        class ScheduleRepository(BaseRepository):
            def __init__(self, db=None):
                super().__init__('volunteer_schedules', db=db)
    """

    def __init__(self, collection_name: str, db=None):
        """
        Args:
            collection_name: Nome da collection no MongoDB
            db: Database do pymongo (opcional, default: get_database())
        """
        if db is None:
            from core.database import get_database
            db = get_database()
        self.db = db
        self.collection = self.db[collection_name]
        self._ensure_indexes()

    def _ensure_indexes(self):
        """Cria índices da collection. Sobrescrito nas classes filhas."""
        pass

    @staticmethod
    def to_object_id(document_id) -> Optional[ObjectId]:
        """Converte um ID (str ou ObjectId) em ObjectId, ou None se inválido."""
        if isinstance(document_id, ObjectId):
            return document_id
        try:
            return ObjectId(document_id)
        except (InvalidId, TypeError):
            return None

    def find_by_id(self, document_id) -> Optional[Dict[str, Any]]:
        """
        Busca documento por ID.

        Returns:
            Documento ou None se o ID for inválido ou não existir
        """
        oid = self.to_object_id(document_id)
        if oid is None:
            return None
        return self.collection.find_one({'_id': oid})

    def find_many(self, query: Dict[str, Any] = None,
                  sort: List[tuple] = None, limit: int = 0) -> List[Dict[str, Any]]:
        """
        Busca múltiplos documentos.

        Args:
            query: Query do MongoDB (None para todos)
            sort: Lista de tuplas (campo, direção)
            limit: Limite de resultados (0 = sem limite)
        """
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insere um documento e devolve-o com o _id gerado."""
        result = self.collection.insert_one(data)
        data['_id'] = result.inserted_id
        return data

    def update(self, document_id, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Atualiza campos de um documento.

        Returns:
            Documento atualizado ou None se não encontrado
        """
        oid = self.to_object_id(document_id)
        if oid is None:
            return None
        result = self.collection.update_one({'_id': oid}, {'$set': data})
        if result.matched_count == 0:
            return None
        return self.find_by_id(oid)

    def delete(self, document_id) -> bool:
        """Remove um documento. Retorna True se algo foi removido."""
        oid = self.to_object_id(document_id)
        if oid is None:
            return False
        result = self.collection.delete_one({'_id': oid})
        return result.deleted_count > 0
