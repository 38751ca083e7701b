# contatos/application/contato_service.py

import re
import uuid
from typing import List, Optional
from uuid import UUID

from cadastro_contatos.exceptions import ErroValidacao, NaoEncontrado
from cadastro_contatos.logs.logging_factory import LoggerFactory
from contatos.domain.entities import Contato
from contatos.domain.validacao import validar_contato
from contatos.infrastructure.contato_repository import ContatoRepository

logger = LoggerFactory.get_logger("contato_service")


class ContatoService:
    def __init__(self, repo: ContatoRepository, padrao_telefone: Optional[str] = None):
        self.repo = repo
        self.padrao_telefone = None
        if padrao_telefone:
            try:
                self.padrao_telefone = re.compile(padrao_telefone)
            except re.error as e:
                raise ValueError(f"Padrão de telefone inválido {padrao_telefone!r}: {e}") from e

    def _validar(self, nome, telefone, tipo_contato) -> None:
        erros = validar_contato(nome, telefone, tipo_contato, self.padrao_telefone)
        if erros:
            raise ErroValidacao(erros)

    def criar(self, nome: str, telefone: str, tipo_contato: str) -> Contato:
        self._validar(nome, telefone, tipo_contato)

        contato = Contato(id=uuid.uuid4(), nome=nome, telefone=telefone, tipo_contato=tipo_contato)
        self.repo.inserir(contato)
        logger.info(f"✅ Contato {contato.id} criado.")
        return contato

    def obter(self, contato_id: UUID) -> Contato:
        contato = self.repo.buscar_por_id(contato_id)
        if contato is None:
            raise NaoEncontrado(f"Contato {contato_id} não encontrado")
        return contato

    def listar(self) -> List[Contato]:
        return self.repo.listar()

    def atualizar(self, contato_id: UUID, nome: str, telefone: str, tipo_contato: str) -> Contato:
        # Sem controle de concorrência otimista: a última gravação prevalece
        self.obter(contato_id)
        self._validar(nome, telefone, tipo_contato)

        contato = Contato(id=contato_id, nome=nome, telefone=telefone, tipo_contato=tipo_contato)
        if not self.repo.atualizar(contato):
            raise NaoEncontrado(f"Contato {contato_id} não encontrado")
        logger.info(f"✅ Contato {contato_id} atualizado.")
        return contato

    def remover(self, contato_id: UUID) -> None:
        """A política de exclusão é verificada na rota, antes de chegar aqui."""
        if not self.repo.remover(contato_id):
            raise NaoEncontrado(f"Contato {contato_id} não encontrado")
        logger.info(f"🗑️ Contato {contato_id} removido.")
