# src/contatos/api/routes.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from authentication.application.policy_service import (
    POLITICA_ANONIMO,
    POLITICA_AUTENTICADO,
    POLITICA_EXCLUIR_CONTATO,
)
from authentication.utils.dependencies import exigir_politica
from cadastro_contatos.api.respostas import erros_por_campo, problema_validacao
from cadastro_contatos.exceptions import ErroValidacao, FalhaPersistencia, NaoEncontrado
from cadastro_contatos.logs.logging_factory import LoggerFactory
from contatos.application.contato_service import ContatoService

router = APIRouter(prefix="/contato", tags=["Contato"])
logger = LoggerFactory.get_logger("contatos_routes")

ERRO_GRAVACAO = "Houve um problema ao salvar o registro"


# --- MODELS ---
class ContatoIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    nome: Optional[str] = None
    telefone: Optional[str] = None
    tipo_contato: Optional[str] = Field(None, alias="tipoContato")


class ContatoOut(BaseModel):
    id: str
    nome: str
    telefone: str
    tipoContato: str


# --- SERVICE ---
def obter_contato_service(request: Request) -> ContatoService:
    return ContatoService(
        request.app.state.contato_repo,
        padrao_telefone=request.app.state.settings.TELEFONE_PADRAO,
    )


async def ler_contato(request: Request) -> ContatoIn:
    """
    Lê o corpo como dependência: as dependências de política da rota rodam antes,
    então um chamador sem token recebe 401 mesmo com JSON malformado.
    """
    corpo = await request.body()
    if not corpo.strip():
        return ContatoIn()
    try:
        return ContatoIn.model_validate_json(corpo)
    except ValidationError as e:
        raise problema_validacao(ErroValidacao(erros_por_campo(e.errors())))


# --- CRUD ---
@router.get(
    "",
    response_model=List[ContatoOut],
    summary="Listar contatos",
    dependencies=[Depends(exigir_politica(POLITICA_ANONIMO))],
)
def listar_contatos(service: ContatoService = Depends(obter_contato_service)):
    return [c.to_dict() for c in service.listar()]


@router.get(
    "/{id}",
    response_model=ContatoOut,
    name="GetContatoPorId",
    summary="Obter contato por id",
    dependencies=[Depends(exigir_politica(POLITICA_AUTENTICADO))],
)
def obter_contato(
    id: UUID = Path(..., description="ID do contato"),
    service: ContatoService = Depends(obter_contato_service),
):
    try:
        return service.obter(id).to_dict()
    except NaoEncontrado:
        raise HTTPException(status_code=404, detail="Contato não encontrado")


@router.post(
    "",
    response_model=ContatoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Criar contato",
    dependencies=[Depends(exigir_politica(POLITICA_AUTENTICADO))],
)
def criar_contato(
    request: Request,
    response: Response,
    contato: ContatoIn = Depends(ler_contato),
    service: ContatoService = Depends(obter_contato_service),
):
    try:
        criado = service.criar(contato.nome, contato.telefone, contato.tipo_contato)
    except ErroValidacao as e:
        raise problema_validacao(e)
    except FalhaPersistencia:
        raise HTTPException(status_code=400, detail=ERRO_GRAVACAO)

    response.headers["Location"] = str(request.url_for("GetContatoPorId", id=str(criado.id)))
    return criado.to_dict()


@router.put(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Atualizar contato",
    dependencies=[Depends(exigir_politica(POLITICA_AUTENTICADO))],
)
def atualizar_contato(
    id: UUID = Path(..., description="ID do contato"),
    contato: ContatoIn = Depends(ler_contato),
    service: ContatoService = Depends(obter_contato_service),
):
    try:
        service.atualizar(id, contato.nome, contato.telefone, contato.tipo_contato)
    except NaoEncontrado:
        raise HTTPException(status_code=404, detail="Contato não encontrado")
    except ErroValidacao as e:
        raise problema_validacao(e)
    except FalhaPersistencia:
        raise HTTPException(status_code=400, detail=ERRO_GRAVACAO)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remover contato",
    dependencies=[Depends(exigir_politica(POLITICA_EXCLUIR_CONTATO))],
)
def remover_contato(
    id: UUID = Path(..., description="ID do contato"),
    service: ContatoService = Depends(obter_contato_service),
):
    try:
        service.remover(id)
    except NaoEncontrado:
        raise HTTPException(status_code=404, detail="Contato não encontrado")
    except FalhaPersistencia:
        raise HTTPException(status_code=400, detail=ERRO_GRAVACAO)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
