import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep RPNCALC_* variables and .env files from leaking into tests."""
    for name in ("RPNCALC_LOG_LEVEL", "RPNCALC_HISTORY_FILE", "RPNCALC_HOST",
                 "RPNCALC_PORT", "RPNCALC_PROMPT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
