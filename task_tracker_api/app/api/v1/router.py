"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers (projects, tasks, users,
tags) under a unified prefix.  When new endpoints are added or when new
domains are introduced, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import projects, tags, tasks, users

router = APIRouter()

router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
