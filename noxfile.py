import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
CONTEXTS = ["identity", "ordering"]


def _install(session: nox.Session) -> None:
    """Install the project with all extras into the nox virtualenv."""
    session.run("poetry", "install", "--all-extras", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregates, entities and value objects only; no handlers, no HTTP."""
    _install(session)
    session.run("pytest", *[f"tests/{context}/domain/" for context in CONTEXTS])


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    _install(session)
    session.run("pytest", *[f"tests/{context}/bdd/" for context in CONTEXTS])


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Run the HTTP-level tests."""
    _install(session)
    session.run("pytest", "-m", "integration")
