"""PublicationWatch: keep a lab's publication list in sync with ORCID and PubMed."""

__version__ = "0.1.0"
