from unimus.api.schemas.citation import Citation
from unimus.config import get_settings
from unimus.models import Dataset, User

UNKNOWN_AUTHOR = "Unknown Author"


def author_name(contributor: User | None) -> str:
    if contributor is None:
        return UNKNOWN_AUTHOR
    return contributor.name or contributor.email or UNKNOWN_AUTHOR


def doi_url(doi: str) -> str:
    return f"https://doi.org/{doi}"


def format_apa(author: str, dataset: Dataset, repository_name: str) -> str:
    locator = doi_url(dataset.doi) if dataset.doi else repository_name
    return f"{author}. ({dataset.publication_year}). {dataset.title} [Dataset]. {locator}."


def format_ieee(author: str, dataset: Dataset) -> str:
    citation = f'{author}, "{dataset.title}," Dataset, {dataset.publication_year}.'
    if dataset.doi:
        return f"{citation} [Online]. Available: {doi_url(dataset.doi)}"
    return f"{citation} [Database]"


def generate_citation(
    dataset: Dataset,
    contributor: User | None = None,
    repository_name: str | None = None,
) -> Citation:
    """APA and IEEE citations for `dataset`, credited to its contributor."""
    author = author_name(contributor)
    repository_name = repository_name or get_settings().REPOSITORY_NAME
    return Citation(
        apa=format_apa(author, dataset, repository_name),
        ieee=format_ieee(author, dataset),
    )
