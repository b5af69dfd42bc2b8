"""DB Demo service: database connectivity resolution."""
