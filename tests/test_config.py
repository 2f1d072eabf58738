from newsdesk.config import Settings


def test_allowed_hosts_match_tunnel_suffixes() -> None:
    settings = Settings()
    assert settings.is_host_allowed("abc123.ngrok-free.app")
    assert settings.is_host_allowed("Demo.NGROK.IO")
    assert not settings.is_host_allowed("example.com")
    assert not settings.is_host_allowed("ngrok-free.app.evil.com")


def test_allowed_hosts_exact_entries() -> None:
    settings = Settings(allowed_hosts=["preview.example.com"])
    assert settings.is_host_allowed("preview.example.com")
    assert not settings.is_host_allowed("other.preview.example.com")
