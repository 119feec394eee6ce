from .cli import app

app(prog_name="a11y-catalog")
