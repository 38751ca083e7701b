#contatos/domain/validacao.py

import re
from typing import Dict, List, Optional, Pattern, Union

NOME_TAMANHO_MAXIMO = 200
TELEFONE_TAMANHO_MAXIMO = 14
TIPO_CONTATO_TAMANHO = 1


def validar_contato(
    nome: Optional[str],
    telefone: Optional[str],
    tipo_contato: Optional[str],
    padrao_telefone: Union[str, Pattern, None] = None,
) -> Dict[str, List[str]]:
    """
    Valida os campos de um contato antes da gravação.
    Retorna um dicionário campo -> mensagens; vazio quando o contato é válido.
    O formato do telefone só é verificado quando um padrão (regex) é configurado.
    """
    erros: Dict[str, List[str]] = {}

    if not nome or not nome.strip():
        erros.setdefault("nome", []).append("O campo nome é obrigatório.")
    elif len(nome) > NOME_TAMANHO_MAXIMO:
        erros.setdefault("nome", []).append(
            f"O campo nome deve ter no máximo {NOME_TAMANHO_MAXIMO} caracteres."
        )

    if not telefone or not telefone.strip():
        erros.setdefault("telefone", []).append("O campo telefone é obrigatório.")
    else:
        if len(telefone) > TELEFONE_TAMANHO_MAXIMO:
            erros.setdefault("telefone", []).append(
                f"O campo telefone deve ter no máximo {TELEFONE_TAMANHO_MAXIMO} caracteres."
            )
        if padrao_telefone and not re.fullmatch(padrao_telefone, telefone):
            erros.setdefault("telefone", []).append("O campo telefone está em formato inválido.")

    if not tipo_contato or not tipo_contato.strip():
        erros.setdefault("tipoContato", []).append("O campo tipoContato é obrigatório.")
    elif len(tipo_contato) != TIPO_CONTATO_TAMANHO:
        erros.setdefault("tipoContato", []).append(
            "O campo tipoContato deve ter exatamente 1 caractere."
        )

    return erros
