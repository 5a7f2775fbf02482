import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with its test group into the nox virtualenv."""
    session.run("poetry", "install", "--with", "test", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (money, items, state machine, aggregate)."""
    _install(session)
    session.run("pytest", "-m", "domain", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_application(session: nox.Session) -> None:
    """Run service, repository and concurrency tests."""
    _install(session)
    session.run("pytest", "-m", "application", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    _install(session)
    session.run("pytest", "-m", "bdd", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Run the HTTP API tests through FastAPI's TestClient."""
    _install(session)
    session.run("pytest", "-m", "integration", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def coverage(session: nox.Session) -> None:
    _install(session)
    session.run("pytest", "--cov=ordering", "--cov-report=term-missing", *session.posargs)
