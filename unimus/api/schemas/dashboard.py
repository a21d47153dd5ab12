from .base import CamelSchema


class DashboardStats(CamelSchema):
    total_datasets: int = 0
    published_datasets: int = 0
    datasets_in_review: int = 0
    total_contributors: int = 0
    total_curators: int = 0
    # datasets created within the last RECENT_SUBMISSION_DAYS days
    recent_submissions: int = 0
    pending_reviews: int = 0
