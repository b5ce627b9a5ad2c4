from random import Random

from fastapi import Request

from repository.base import Repository


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def get_rng(request: Request) -> Random:
    return request.app.state.rng
