from zarrpeek._cli.cli import app

app(prog_name="zarrpeek")
