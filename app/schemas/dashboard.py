from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    total_students: int
    total_classes: int
    total_exams: int
    # Exams currently visible on the public portal
    published_results: int
