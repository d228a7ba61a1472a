"""Built-in CLI sub-commands for the ``osm`` command line.

* :mod:`~osmclient.commands.auth` -- log in and show the login status.
* :mod:`~osmclient.commands.data` -- terms, badges, events and members.
* :mod:`~osmclient.commands.cache` -- inspect and clear the session cache.
* :mod:`~osmclient.commands.config` -- view and modify settings.

Multi-command groups export a :class:`typer.Typer` sub-application; the data
commands are plain callbacks registered directly on the root app.
:mod:`~osmclient.commands.common` holds the client setup they share.
"""
