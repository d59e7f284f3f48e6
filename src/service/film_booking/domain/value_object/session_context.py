import attrs


@attrs.frozen
class SessionContext:
    """Authenticated caller: bearer token forwarded to the backend plus the user's id."""

    token: str = attrs.field(repr=False)
    user_id: str

    def auth_headers(self) -> dict[str, str]:
        return {'Authorization': f'Bearer {self.token}'} if self.token else {}
