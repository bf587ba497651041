"""Tests for health check endpoints."""

from types import SimpleNamespace
from unittest.mock import patch, MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from groupware.api.routers import health


class TestHealthEndpoints:
    """Test health check endpoints."""
    
    def test_basic_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data
    
    def test_liveness_probe(self, client: TestClient):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"
    
    def test_readiness_probe_healthy(self, client: TestClient):
        response = client.get("/health/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["database"]["dialect"] == "sqlite"
    
    def test_readiness_probe_database_down(self, client: TestClient):
        down = {"status": "unhealthy", "error": "connection refused"}
        with patch.object(health, "check_database", return_value=down):
            response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
    
    def test_health_detailed(self, client: TestClient):
        response = client.get("/health/detailed")
        assert response.status_code in [200, 503]
        data = response.json()
        assert set(data["checks"]) == {"database", "disk", "memory"}


class TestChecks:
    """Test the individual check helpers."""
    
    def test_check_database_failure(self):
        db = MagicMock()
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        result = health.check_database(db)
        assert result["status"] == "unhealthy"
        assert "error" in result
    
    def test_usage_thresholds(self):
        assert health._usage_status(10, 85, 95) == "healthy"
        assert health._usage_status(90, 85, 95) == "warning"
        assert health._usage_status(99, 85, 95) == "critical"
    
    def test_check_disk_reports_critical(self):
        usage = SimpleNamespace(total=100 * 1024**3, free=1024**3, percent=99.0)
        with patch.object(health.psutil, "disk_usage", return_value=usage):
            result = health.check_disk()
        assert result["status"] == "critical"
        assert result["free_gb"] == 1.0
    
    def test_check_memory_reports_warning(self):
        memory = SimpleNamespace(total=8 * 1024**3, available=1024**3, percent=87.5)
        with patch.object(health.psutil, "virtual_memory", return_value=memory):
            result = health.check_memory()
        assert result["status"] == "warning"
