from docforest.cli import app

app(prog_name="docforest")
