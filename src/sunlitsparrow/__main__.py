from sunlitsparrow.cli import app

app(prog_name="sunlitsparrow")
