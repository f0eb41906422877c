from mdpack.cli import app

app(prog_name="mdpack")
