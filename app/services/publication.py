from app.models.exams import Exam


def is_visible(exam: Exam) -> bool:
    """Whether results of ``exam`` may be shown on the public portal.

    Only the public result lookup consults this. Admin endpoints read and
    edit marks of unpublished exams without restriction.
    """
    return bool(exam.is_published)
