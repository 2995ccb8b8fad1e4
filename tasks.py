# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create the development environment with uv."""
    ctx.run("uv sync --all-extras")


@task
def lint(ctx):
    """
    Check style and types of the package and its tests.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=roomfinder --cov-report=term-missing", pty=True)


@task
def mock(ctx, port=8080):
    """Serve a mock SmartRoomHub on localhost for manual scans."""
    ctx.run(f"roomfinder mock --host 127.0.0.1 --port {port}", pty=True)


@task
def build_package(ctx):
    """
    Build sdist and wheel into dist/.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")
