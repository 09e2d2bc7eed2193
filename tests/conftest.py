from unittest.mock import Mock

import pytest

from sqlbatch.providers.control_plane.client import ControlPlaneClient
from tests.utils.http_fakes import make_response


@pytest.fixture
def temp_workspace(tmp_path):
    """Create a temporary workspace directory"""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def mock_session() -> Mock:
    """Session double whose calls succeed with an empty JSON object by default"""
    session = Mock()
    session.hooks = {}
    session.post.return_value = make_response(json_body={})
    session.get.return_value = make_response(json_body={"status": "ok"})
    return session


@pytest.fixture
def client(mock_session: Mock) -> ControlPlaneClient:
    return ControlPlaneClient("http://mcp.local:3011/", "proj_123", session=mock_session)


@pytest.fixture
def sample_schema_sql() -> str:
    """Schema script with a function body, a trigger and quoted semicolons"""
    return """
-- AgriWeather schema
CREATE TABLE IF NOT EXISTS user_profiles (
    id UUID PRIMARY KEY,
    display_name TEXT DEFAULT 'farmer; default'
);

/* preferences; one row per user */
CREATE TABLE IF NOT EXISTS user_preferences (
    user_id UUID REFERENCES user_profiles(id),
    units TEXT NOT NULL DEFAULT 'metric'
);

CREATE OR REPLACE FUNCTION handle_new_user()
RETURNS TRIGGER AS $$
BEGIN
    INSERT INTO user_profiles (id) VALUES (NEW.id);
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

CREATE TRIGGER on_auth_user_created
    AFTER INSERT ON auth.users
    FOR EACH ROW EXECUTE FUNCTION handle_new_user();
"""
