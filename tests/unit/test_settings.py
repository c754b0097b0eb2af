from manpoweradmin.config import Settings, repo_root


def test_defaults_match_collections_and_display() -> None:
    s = Settings()
    assert s.submissions_collection == "manpowerSubmissions"
    assert s.payments_collection == "manpowerServicePayments"
    assert s.default_currency == "BDT"
    assert s.flash_seconds == 3.0


def test_env_prefix_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MANPOWER_STORE_BACKEND", "memory")
    monkeypatch.setenv("MANPOWER_FLASH_SECONDS", "5")
    s = Settings()
    assert s.store_backend == "memory"
    assert s.flash_seconds == 5.0


def test_repo_root_holds_pyproject() -> None:
    assert (repo_root() / "pyproject.toml").exists()
