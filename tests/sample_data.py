import copy

from resultdesk.core.models import ClassConfig

SCIENCE_CONFIG = ClassConfig(
    class_name="5",
    subjects=("Math", "Sci"),
    terms=("T1",),
    full_marks={"T1": {"Math": 100, "Sci": 50}},
)

_DOCUMENT = {
    "configs": [
        {
            "class": "5",
            "subjects": ["Math", "Science", "English"],
            "terms": ["Term 1", "Term 2"],
            "fullMarks": {
                "Term 1": {"Math": 100, "Science": 50, "English": 100},
                "Term 2": {"Math": 100},
            },
        },
        {
            "class": "6",
            "subjects": ["Hindi"],
            "terms": ["Term 1"],
        },
    ],
    "students": [
        {
            "id": "s1",
            "class": "5",
            "roll": 1,
            "studentName": "Asha Rai",
            "dob": "2014-03-01",
            "marks": {
                "Term 1": {"Math": 90, "Science": "AB", "English": 80},
                "Term 2": {"Math": 70, "Science": 60, "English": 75},
            },
        },
        {
            "id": "s2",
            "class": "5",
            "roll": "2",
            "studentName": "Bilal Khan",
            "dob": "2014-07-12",
            "marks": {
                "Term 1": {"Math": 85, "Science": 45, "English": 40},
            },
        },
        {
            "id": "s3",
            "class": "5",
            "roll": 3,
            "studentName": "Chen Li",
            "dob": "2013-11-30",
            "marks": {
                "Term 1": {"Math": "ab", "Science": "40", "English": "xyz"},
                "Term 2": {"Math": 100, "Science": 90, "English": 95},
            },
        },
        {
            "id": "s4",
            "class": "6",
            "roll": 1,
            "studentName": "Divya Sen",
            "exams": {"Term 1": {"Hindi": 50}},
        },
    ],
    "publications": [
        {"term": "Term 1", "isPublished": True, "publishedAt": "2026-03-01T10:00:00Z"},
    ],
}


def snapshot_document():
    return copy.deepcopy(_DOCUMENT)
