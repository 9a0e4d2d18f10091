from notepad.core.config import Settings


def test_csv_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://notes.example.com")

    s = Settings()

    assert s.cors_origins == ["http://localhost:5173", "https://notes.example.com"]


def test_json_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.example.com"]')

    assert Settings().cors_origins == ["https://a.example.com"]


def test_api_prefix_normalized():
    assert Settings(api_prefix="api/").api_prefix_normalized == "/api"
    assert Settings(api_prefix="").api_prefix_normalized == ""


def test_mail_configured_depends_on_provider():
    assert not Settings(mail_provider="sendgrid", sendgrid_api_key=None).mail_configured
    assert Settings(mail_provider="sendgrid", sendgrid_api_key="k", sendgrid_from_email="a@b.c").mail_configured
    assert Settings(mail_provider="smtp", smtp_host="smtp.example.com", smtp_user="u").mail_configured


def test_auth_public_paths_follow_api_prefix():
    paths = Settings(api_prefix="/v1/").all_public_paths

    assert "/v1/auth/verify-token" in paths
    assert "/v1/auth/logout" in paths
    assert "/api/auth/verify-token" not in paths
    assert "/health" in paths
