"""학과/분반 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel


class DepartmentOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class DivisionOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}
