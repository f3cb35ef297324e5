from patchkit.cli import app

app(prog_name="patchkit")
