"""
Endpoints de perfil: consulta, upsert, listas experience/education, borrado
de cuenta y repos de GitHub.

La API delega en `services/profile_service.py` (API delgada, lógica en
servicios). Los errores de dominio los traduce `core/exceptions.py`.
"""
from fastapi import APIRouter, Depends

from devconnector.api.deps import get_current_user, get_settings
from devconnector.api.schemas.common import MsgOut
from devconnector.api.schemas.profile import EducationIn, ExperienceIn, ProfileIn
from devconnector.core.config import Settings
from devconnector.infrastructure.http import github_client
from devconnector.services import profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me", response_model=dict, summary="Perfil del usuario autenticado")
def get_my_profile(user=Depends(get_current_user)):
    return profile_service.get_my_profile(user)


@router.post(
    "",
    response_model=dict,
    summary="Crear o actualizar perfil",
    description="Requiere `status` y `skills`; solo se escriben los campos presentes.",
)
def upsert_profile(payload: ProfileIn, user=Depends(get_current_user)):
    payload.ensure_valid()
    return profile_service.upsert_profile(user, payload.model_dump())


@router.get("", response_model=list, summary="Listar perfiles")
def list_profiles():
    return profile_service.list_profiles()


@router.get("/user/{user_id}", response_model=dict, summary="Perfil por id de usuario")
def get_profile_by_user(user_id: str):
    return profile_service.get_profile_by_user(user_id)


@router.delete(
    "",
    response_model=MsgOut,
    summary="Eliminar cuenta",
    description="Borra posts, perfil y usuario del autenticado.",
)
def delete_account(user=Depends(get_current_user)):
    profile_service.delete_account(user)
    return MsgOut(msg="User deleted.")


@router.put("/experience", response_model=dict, summary="Agregar experiencia")
def add_experience(payload: ExperienceIn, user=Depends(get_current_user)):
    payload.ensure_valid()
    return profile_service.add_entry(user, "experience", payload.model_dump(by_alias=True))


@router.delete("/experience/{exp_id}", response_model=dict, summary="Eliminar experiencia")
def delete_experience(exp_id: str, user=Depends(get_current_user)):
    return profile_service.remove_entry(user, "experience", exp_id)


@router.put("/education", response_model=dict, summary="Agregar educación")
def add_education(payload: EducationIn, user=Depends(get_current_user)):
    payload.ensure_valid()
    return profile_service.add_entry(user, "education", payload.model_dump(by_alias=True))


@router.delete("/education/{edu_id}", response_model=dict, summary="Eliminar educación")
def delete_education(edu_id: str, user=Depends(get_current_user)):
    return profile_service.remove_entry(user, "education", edu_id)


@router.get("/github/{username}", summary="Repos públicos de GitHub")
def get_github_repos(username: str, cfg: Settings = Depends(get_settings)):
    return github_client.list_user_repos(username, cfg)
