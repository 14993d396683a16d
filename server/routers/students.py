from fastapi import APIRouter, Body, Depends, Request
from typing import Any, Dict, List

from models.student import cast_new_student, cast_student_changes

router = APIRouter()


def get_store(request: Request):
    return request.app.state.store


@router.post("", response_model=Dict[str, Any])
async def create_student(payload: Any = Body(...), store=Depends(get_store)):
    student = cast_new_student(payload)
    return await store.create(student)


@router.get("", response_model=List[Dict[str, Any]])
async def get_students(store=Depends(get_store)):
    return await store.list()


@router.get("/{email:path}", response_model=Dict[str, Any])
async def get_student(email: str, store=Depends(get_store)):
    return await store.get(email)


@router.put("/{email:path}", response_model=Dict[str, Any])
async def update_student(email: str, payload: Any = Body(...), store=Depends(get_store)):
    # The email in the body is applied like any other field; only the path email selects.
    changes = cast_student_changes(payload)
    return await store.update(email, changes)


@router.delete("/{email:path}", response_model=Dict[str, Any])
async def delete_student(email: str, store=Depends(get_store)):
    return await store.delete(email)
