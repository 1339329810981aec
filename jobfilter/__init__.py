"""jobfilter - keyword/company filtering of job-listing cards on recruiting pages."""

__version__ = "0.1.0"
