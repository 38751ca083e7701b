#contatos/domain/entities.py

from dataclasses import dataclass
from uuid import UUID


@dataclass
class Contato:
    id: UUID
    nome: str
    telefone: str
    tipo_contato: str  # código de um caractere, ex: 'P' (pessoal), 'C' (comercial)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "nome": self.nome,
            "telefone": self.telefone,
            "tipoContato": self.tipo_contato,
        }
