from src.kintai_system.kintai_system.container import build_container
from src.kintai_system.kintai_system.main import create_app


def test_create_app_registers_routes(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")

    app = create_app()

    assert app.config["TESTING"] is True
    rules = {r.rule for r in app.url_map.iter_rules()}
    assert "/api/tenants/<tenant_id>/attendance/clock-in" in rules
    assert "/api/tenants/<tenant_id>/payroll/summary-payroll.csv" in rules


def test_build_container_does_not_connect_eagerly():
    container = build_container(
        db_config={"host": "db.invalid", "user": "u", "password": "p", "database": "kintai_x"},
        reclockin_threshold_minutes=15,
    )

    assert container.conn.description == "u@db.invalid:3306/kintai_x"
    assert container.attendance_service._reclockin_threshold == 15
