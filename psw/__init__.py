"""PSW script engine.

Turns a project ``Configuration`` into an ordered ``dotnet`` command script and
runs that script as a validated, cleaned-up subprocess.

Quick usage::

    from psw.generator import Configuration, generate_script
    from psw.executor import run_script

    script = generate_script(Configuration(project_name="MyProject"))
    await run_script(script, "/tmp/my-site")
"""

__version__ = "0.1.0"
