from fastapi import Request

from .controller import AppController


def get_controller(request: Request) -> AppController:
	return request.app.state.controller
