"""Command implementations invoked by the logstreamd CLI."""
