# (c) Copyright Datacraft, 2026
"""Typed test client used by router tests."""
import httpx

from drivewatch.core.features.users.db.orm import User


class AuthTestClient:
	"""httpx client bound to the app, authenticated as `user`."""

	def __init__(self, client: httpx.AsyncClient, user: User):
		self.client = client
		self.user = user

	async def get(self, url: str, **kwargs) -> httpx.Response:
		return await self.client.get(url, **kwargs)

	async def post(self, url: str, **kwargs) -> httpx.Response:
		return await self.client.post(url, **kwargs)

	async def put(self, url: str, **kwargs) -> httpx.Response:
		return await self.client.put(url, **kwargs)

	async def patch(self, url: str, **kwargs) -> httpx.Response:
		return await self.client.patch(url, **kwargs)

	async def delete(self, url: str, **kwargs) -> httpx.Response:
		return await self.client.delete(url, **kwargs)
