"""Shared helpers for the catalog routers"""
from fastapi import HTTPException
from typing import Optional


def check_not_found(item, resource_name: str = "Resource", resource_id: Optional[str] = None) -> None:

    if not item:
        if resource_id:
            raise HTTPException(
                status_code=404,
                detail=f"{resource_name} with id {resource_id} not found"
            )
        raise HTTPException(status_code=404, detail=f"{resource_name} not found")
