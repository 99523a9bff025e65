"""
Mock survey database for the RTP dashboard.

Holds the teacher roster, the question banks for the four RTP surveys and a
seeded generator of plausible answers. The generated answers feed the mock
submissions, the indicator calculations and the database seeding script.
"""

import random
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Dict, List, Optional

from rtp_reporting_system.backend.config import BaseConfig

# ============================================================================
# ROSTER
# ============================================================================

TEACHERS = [
    {"id": 1, "name": "KYEREH CLEMENT", "staff_number": "1436636", "gender": "Male",
     "region": "BONO", "district": "JAMAN NORTH", "circuit": "GOKA",
     "school": "ASANTEKROM D/A PRIMARY"},
    {"id": 2, "name": "BOATENG LINDA", "staff_number": "784242", "gender": "Female",
     "region": "BONO", "district": "BEREKUM WEST", "circuit": "NSAPOR",
     "school": "NSAPOR METHODIST BASIC"},
    {"id": 3, "name": "Enyam Mary", "staff_number": "189040", "gender": "Female",
     "region": "ASHANTI", "district": "OBUASI EAST", "circuit": "KWABENAKWA",
     "school": "POMPOSO R/C PRIMARY 'A'"},
    {"id": 4, "name": "AKATA DANIELS REGINA", "staff_number": "156739", "gender": "Female",
     "region": "OTI", "district": "BIAKOYE", "circuit": "WORAWORA",
     "school": "AKPOSO KABO R.C KG & PRIMARY SCHOOL"},
    {"id": 5, "name": "MARTEY GLORIA", "staff_number": "1428913", "gender": "Female",
     "region": "ASHANTI", "district": "AMANSIE WEST", "circuit": "PAKYI",
     "school": "PAKYI NO. 1 DA KG & PRIMARY"},
    {"id": 6, "name": "OWUSU KWAME", "staff_number": "1390412", "gender": "Male",
     "region": "BONO", "district": "JAMAN NORTH", "circuit": "GOKA",
     "school": "GOKA PRESBY PRIMARY"},
    {"id": 7, "name": "ADJEI SAMUEL", "staff_number": "1051877", "gender": "Male",
     "region": "OTI", "district": "BIAKOYE", "circuit": "WORAWORA",
     "school": "AKPOSO KABO R.C KG & PRIMARY SCHOOL"},
    {"id": 8, "name": "MENSAH ABENA", "staff_number": "902315", "gender": "Female",
     "region": "ASHANTI", "district": "OBUASI EAST", "circuit": "KWABENAKWA",
     "school": "POMPOSO R/C PRIMARY 'A'"},
]

# ============================================================================
# QUESTION BANKS
# ============================================================================

QUESTIONS_SCHOOL_OUTPUT = [
    {"id": 1, "question": "Number of MALE Teacher Champions/Curriculum Leads who have received training on LtP by the District Teacher Support Team (DTST)", "type": "number"},
    {"id": 2, "question": "Number of FEMALE Teacher Champions/Curriculum Leads who have received training on LtP by the District Teacher Support Team (DTST)", "type": "number"},
    {"id": 3, "question": "Number of Training provided or organised this term through INSET", "type": "number"},
    {"id": 4, "question": "Number of MALE teachers Trained in PBL and Safe School Environment", "type": "number"},
    {"id": 5, "question": "Number of FEMALE teachers Trained in PBL and Safe School Environment", "type": "number"},
    {"id": 6, "question": "Number of MALE teachers Trained in Early Childhood Education (ECE)", "type": "number"},
    {"id": 7, "question": "Number of FEMALE teachers Trained in Early Childhood Education (ECE)", "type": "number"},
    {"id": 8, "question": "Number of MALE teachers Trained in any other form of training", "type": "number"},
    {"id": 9, "question": "Number of FEMALE teachers Trained in any other form of training", "type": "number"},
    {"id": 10, "question": "Number of Male teachers in the school who have receive no training", "type": "number"},
    {"id": 11, "question": "Number of FEMALE teachers in the school who have receive no training", "type": "number"},
    {"id": 12, "question": "Number of BOYS enrolled", "type": "number"},
    {"id": 13, "question": "Number of GIRLs enrolled", "type": "number"},
    {"id": 14, "question": "Total number of BOYs with Special Needs/disabilities", "type": "number"},
    {"id": 15, "question": "Total number of GIRLS with special needs/disabilities", "type": "number"},
    {"id": 16, "question": "Number of coaching and mentoring support visits to your school this term", "type": "number"},
    {"id": 17, "question": "Total number of MALE teachers who went on transfer (term/year)", "type": "number"},
    {"id": 18, "question": "Total number of Female teachers who went on transfer (term/year)", "type": "number"},
]

QUESTIONS_DISTRICT_OUTPUT = [
    {"id": 1, "question": "Number of District teacher support teams supported to develop teacher training plans for integration at school level CPD in 48 districts", "type": "number"},
    {"id": 2, "question": "Number of trainings provided to District teacher support teams", "type": "number"},
    {"id": 3, "question": "Number of district support teams's members trained with RTP staff support", "type": "number"},
    {"id": 4, "question": "Number of Districts who in collaboration with district education officials have developed coaching and mentoring plan for 55 districts (3 regions)", "type": "number"},
    {"id": 5, "question": "Number of District Teacher Support Teams (DST) trained in coaching and mentoring and school leadership in 55 districts", "type": "number"},
    {"id": 6, "question": "Number of DTST members (M/F) trained in coaching and mentoring and school leadership in the 55 districts (disaggregated by type of training)", "type": "number"},
    {"id": 7, "question": "Number of districts provided with financial support to conduct regular coaching and mentoring to trained teachers and support to schools - to 55 partner districts (DST)", "type": "number"},
    {"id": 8, "question": "Number of Quarterly district planning and review meetings held with each of the 55 districts to gather updates, challenges and lessons (GALOP)", "type": "number"},
    {"id": 9, "question": "Number of district officials attending the District planning and review meetings (disaggregated by sex)", "type": "number"},
    {"id": 10, "question": "Number of schools visited in each quarter in the 55 districts to gather updates, challenges and lessons", "type": "number"},
    {"id": 11, "question": "Number of Trainers (M/F) from 55 District Support Teams trained on the integration of LtP (15 trainers X 55 districts", "type": "number"},
    {"id": 12, "question": "Number of quarterly planning and review meetings including monitoring and supervision visits conducted with national level GES", "type": "number"},
    {"id": 13, "question": "Number of people attending the national planning and review meetings (disaggregated by category)", "type": "number"},
]

YES_NO = ["Yes", "No"]

QUESTIONS_CONSOLIDATED_CHECKLIST = [
    {"id": 1, "question": "Level of Intervention", "type": "select", "options": ["GALOP", "Direct", "Indirect"]},
    {"id": 2, "question": "Full Name of Assessor", "type": "text"},
    {"id": 3, "question": "Designation", "type": "text"},
    {"id": 4, "question": "GPS of school", "type": "gps"},
    {"id": 5, "question": "Region", "type": "select"},
    {"id": 6, "question": "District", "type": "select"},
    {"id": 7, "question": "Circuit", "type": "select"},
    {"id": 8, "question": "Name of the School", "type": "select"},
    {"id": 9, "question": "Level of School", "type": "select", "options": ["Kindergarten", "Primary"]},
    {"id": 10, "question": "Academic Year", "type": "select"},
    {"id": 11, "question": "Term", "type": "select"},
    {"id": 12, "question": "Date of Assessment", "type": "date"},
    {"id": 13, "question": "Number of Male Teachers Present", "type": "number"},
    {"id": 14, "question": "Number of Female Teachers Present", "type": "number"},
    {"id": 15, "question": "Number of Boys in Class", "type": "number"},
    {"id": 16, "question": "Number of Girls in Class", "type": "number"},
    {"id": 17, "question": "Does the school have an implementation plan such as documented/written plans on how Learning through Play (LtP) will be implemented (integrated into teaching practice) in their schools?", "type": "select", "options": YES_NO},
    {"id": 18, "question": "Does the school have written plans for implementing LtP?", "type": "select", "options": YES_NO},
    {"id": 19, "question": "Does the school has teachers' who have prepared Lesson/learner plans that include LtP activities?", "type": "select", "options": YES_NO},
    {"id": 20, "question": "Are the teachers in the school trained in LTP Pedagogies (CoTT) modules.", "type": "select", "options": YES_NO},
]

# Answer options for the scored Partners in Play observation questions
Q29_OPTIONS = [
    "Learner plan available with performance indicator",
    "Learner plan available but no performance indicator",
    "No learner plan available",
]
Q30_OPTIONS = [
    "Performance indicators are irrelevant to topics/subtopics",
    "Performance indicators are relevant to topics/sub-topics but generally in abstract terms",
    "Performance indicators are clear and SMART, but NOT related to evaluations which are stated in lesson plan",
    "Performance indicators are clear and SMART, and related to evaluations which are stated in lesson plan",
    "Performance indicators s are clear and SMART and include at least 2 profile dimensions in the syllabus",
]
Q31_OPTIONS = ["Yes, two or more are included", "Yes, one is included", "No, none is included"]
Q32_OPTIONS = [
    "Teacher did Not state TLRs",
    "TLRs stated BUT not related to lesson objectives",
    "TLRs stated and are relevant to lesson objectives",
    "TLRs are stated and indicated in suitable development stages of lesson",
]
Q33_OPTIONS = [
    "Yes, written on chalkboard",
    "Yes, explained by teacher",
    "Yes, explained by teacher and written on board",
    "Yes, other means (specify)",
    "No",
]
Q39_OPTIONS = [
    "Teacher does not ask questions at all in lesson",
    "Teacher asks only low order (recall) and rhetorical questions such as yes-or-no questions",
    "Teacher asks well-balanced low / high order questions, pauses and calls on volunteers to respond",
    "Teacher asks low/ high order questions which promote higher order responses and encourages even non-volunteers to respond or ask questions",
    "Teacher asks low / high order questions, one at a time and sequenced in order of difficulty which is suited to the level of pupils",
]
FREQUENCY_OPTIONS = ["Frequently", "Sometimes, but not regularly", "Not at all"]
TONE_OPTIONS = ["Frequently", "Sometimes, but not regularly", "Only with boys", "Only with girls", "Not at all"]
Q45_OPTIONS = [
    "Teacher keeps talking without involving pupils",
    "Teacher introduces activities which arouse pupils'interests but demonstrates them by teacher him / herself",
    "Teacher introduces activities, and pupils participate in it actively and with interests",
    "Teacher introduces activities that equip pupils with generic skills through problem solving",
    "Teacher introduces activities that promote mutual learning among pupils",
]
Q46_OPTIONS = ["Yes, mixed group", "Yes, Boys only", "Yes, Girls only", "Not at all"]
Q49_OPTIONS = [
    "Teacher makes no evaluation of lesson",
    "Teacher assesses pupils' knowledge / understanding during the lesson, but the assessment is not related to objectives/core competencies of lesson",
    "Teacher assesses pupils' knowledge / understanding during the lesson which are related to objectives/ core competencies of lesson",
    "Teacher assesses pupils' understanding during lesson (formative assessment) and restructures the development of lesson based on the result of evaluation of pupils' understanding",
    "Teacher assesses pupils' readiness / understanding / achievement in the lesson using appropriate questions based on at least 2 profile dimensions in syllabus",
]

QUESTIONS_PIP = [
    {"id": 1, "question": "Enumerator Name", "type": "text"},
    {"id": 2, "question": "Level of intervention", "type": "select", "options": ["GALOP", "Direct", "Indirect"]},
    {"id": 3, "question": "GPS Location", "type": "gps"},
    {"id": 4, "question": "In which region are you filling out this form?", "type": "select"},
    {"id": 5, "question": "Name of District", "type": "select"},
    {"id": 6, "question": "Name of Circuit", "type": "select"},
    {"id": 7, "question": "Name of school", "type": "select"},
    {"id": 8, "question": "Academic Year", "type": "text"},
    {"id": 9, "question": "Term", "type": "select", "options": ["First", "Second", "Third"]},
    {"id": 10, "question": "Date of the Lesson Observation", "type": "date"},
    {"id": 11, "question": "Full Name of the Teacher Observed", "type": "select"},
    {"id": 12, "question": "Grade (Class)", "type": "select", "options": ["KG1", "KG2", "Basic 1", "Basic 2", "Basic 3", "Basic 4", "Basic 5", "Basic 6"]},
    {"id": 13, "question": "Topic (Strand)", "type": "select"},
    {"id": 14, "question": "Sub Topic/Sub Strand", "type": "text"},
    {"id": 15, "question": "Reference Material", "type": "text"},
    {"id": 16, "question": "Planned Time", "type": "text"},
    {"id": 17, "question": "Activity Type", "type": "select", "options": ["Demonstration Lesson", "Peer Teaching"]},
    {"id": 18, "question": "Sex of the Teacher", "type": "select", "options": ["Male", "Female"]},
    {"id": 19, "question": "Has the teacher received training from RTP?", "type": "select", "options": YES_NO},
    {"id": 20, "question": "Subject taught in this lesson observation", "type": "select"},
    {"id": 21, "question": "Language teacher used during lesson observation", "type": "multiselect", "options": ["English", "Ga", "Dagbani", "Ewe", "Twi", "Dangme", "Other"]},
    {"id": 22, "question": "Number of Girls Present", "type": "number"},
    {"id": 23, "question": "Number of boys Present", "type": "number"},
    {"id": 24, "question": "Number of Girls with special needs/disability present", "type": "number"},
    {"id": 25, "question": "Number of Boys with special needs/disability present", "type": "number"},
    {"id": 26, "question": "Are there sufficient tables and chairs for boys and girls?", "type": "select", "options": ["Yes, equal distribution", "More boys have tables and chairs", "More girls have tables and chairs", "No, tables and chairs are not sufficient for both girls and boys"]},
    {"id": 27, "question": "Are there sufficient textbooks for boys and girls?", "type": "select", "options": ["Yes, equal distribution", "More boys have textbooks", "More girls have textbooks", "No, textbooks are not sufficient for both girls and boys", "No textbooks at all"]},
    {"id": 28, "question": "Are boys and girls distributed around the classroom?", "type": "select", "options": ["Yes", "No, boys are with boys and girls are with girls", "No, girls sit in front and boys at the back", "No, boys sit in front and girls at the back"]},
    {"id": 29, "question": "Is there a learner plan with clear performance indicator available when requested from teacher?", "type": "select", "options": Q29_OPTIONS},
    {"id": 30, "question": "Are performance indicators SMART and relevant to topics?", "type": "select", "options": Q30_OPTIONS},
    {"id": 31, "question": "Does the lesson plan include interactive group activities?", "type": "select", "options": Q31_OPTIONS},
    {"id": 32, "question": "Has the Teacher stated appropriate TLRs?", "type": "select", "options": Q32_OPTIONS},
    {"id": 33, "question": "Are the Learning Objectives/performance indicators for the lesson made clear?", "type": "select", "options": Q33_OPTIONS},
    {"id": 39, "question": "Does the teacher use appropriate questioning skills?", "type": "select", "options": Q39_OPTIONS},
    {"id": 40, "question": "Does the teacher encourage girls to answer questions?", "type": "select", "options": FREQUENCY_OPTIONS},
    {"id": 41, "question": "Does the teacher encourage boys to answer questions?", "type": "select", "options": FREQUENCY_OPTIONS},
    {"id": 42, "question": "Who does the teacher call on to lead class activities?", "type": "select", "options": ["Both", "Boys", "Girls"]},
    {"id": 43, "question": "Does the teacher speak in a friendly tone?", "type": "select", "options": TONE_OPTIONS},
    {"id": 44, "question": "Does the teacher actively acknowledge student effort when they give incorrect answers?", "type": "select", "options": TONE_OPTIONS},
    {"id": 45, "question": "Does teacher allow pupils to participate in class?", "type": "select", "options": Q45_OPTIONS},
    {"id": 46, "question": "Did the teacher form small groups to undertake tasks?", "type": "select", "options": Q46_OPTIONS},
    {"id": 48, "question": "Did the teacher create space for discussion?", "type": "select", "options": FREQUENCY_OPTIONS},
    {"id": 49, "question": "Does teacher make evaluation of the lesson taught?", "type": "select", "options": Q49_OPTIONS},
    {"id": 52, "question": "Did learners use play materials or manipulatives during the lesson?", "type": "select", "options": YES_NO},
    {"id": 53, "question": "Did the lesson include a game or play-based activity?", "type": "select", "options": YES_NO},
    {"id": 54, "question": "Were learners given choices in how to complete the activity?", "type": "select", "options": YES_NO},
    {"id": 55, "question": "Did learners work collaboratively in pairs or groups?", "type": "select", "options": YES_NO},
    {"id": 56, "question": "Did the teacher link the play activity to the learning objective?", "type": "select", "options": YES_NO},
    {"id": 57, "question": "Did learners reflect on what they learned through play?", "type": "select", "options": YES_NO},
    {"id": 58, "question": "Were locally available materials used for play?", "type": "select", "options": YES_NO},
    {"id": 59, "question": "Was the classroom arranged to allow movement during play?", "type": "select", "options": YES_NO},
    {"id": 60, "question": "Were all learners, including those with special needs, included in play?", "type": "select", "options": YES_NO},
]

SURVEY_QUESTIONS = {
    "school_output": QUESTIONS_SCHOOL_OUTPUT,
    "district_output": QUESTIONS_DISTRICT_OUTPUT,
    "consolidated_checklist": QUESTIONS_CONSOLIDATED_CHECKLIST,
    "partners_in_play": QUESTIONS_PIP,
}

# Select questions answered from the respondent's own context
CHECKLIST_CONTEXT_FIELDS = {5: "region", 6: "district", 7: "circuit", 8: "school"}
PIP_CONTEXT_FIELDS = {4: "region", 5: "district", 6: "circuit", 7: "school", 11: "name", 18: "gender"}


def unique_values(records: List[Dict[str, Any]], key: str) -> List[Any]:
    """Distinct values of ``key`` in first-seen order, skipping empty ones."""
    seen = []
    for record in records:
        value = record.get(key)
        if value and value not in seen:
            seen.append(value)
    return seen


def find_question(survey_type: str, question_id: int) -> Optional[Dict[str, Any]]:
    for question in SURVEY_QUESTIONS.get(survey_type, []):
        if question["id"] == question_id:
            return question
    return None


# ============================================================================
# ANSWER GENERATION
# ============================================================================

def generate_mock_answer(
    rng: random.Random,
    question: Dict[str, Any],
    survey_type: str = "school",
    context: Optional[Dict[str, Any]] = None,
    today: Optional[datetime] = None,
) -> str:
    """
    Generate a plausible answer for a question.

    Args:
        rng: Seeded random generator
        question: Question definition (id, type, options)
        survey_type: "school", "district", "checklist" or "pip"
        context: Teacher (or district) record the answer belongs to
        today: Reference date for date answers

    Returns:
        The answer as a string, the way the mobile app stores it
    """
    question_id = question["id"]
    qtype = question["type"]
    context = context or {}

    if qtype == "number":
        if question_id <= 2:
            return str(rng.randint(1, 5))
        if 12 <= question_id <= 15:
            return str(rng.randint(20, 69))
        if 22 <= question_id <= 25 and survey_type == "pip":
            return str(rng.randint(15, 44))
        return str(rng.randint(1, 10))

    if qtype == "select":
        if survey_type == "checklist" and question_id in CHECKLIST_CONTEXT_FIELDS:
            return context.get(CHECKLIST_CONTEXT_FIELDS[question_id], "")
        if survey_type == "pip" and question_id in PIP_CONTEXT_FIELDS:
            return context.get(PIP_CONTEXT_FIELDS[question_id], "")
        if survey_type == "checklist" and question_id == 9:
            return "Primary" if rng.random() > 0.6 else "Kindergarten"
        if survey_type == "checklist" and 17 <= question_id <= 20:
            # 70% Yes for the implementation questions
            return "Yes" if rng.random() > 0.3 else "No"
        if question.get("options"):
            return rng.choice(question["options"])
        return "Yes" if rng.random() > 0.5 else "No"

    if qtype == "text":
        if question_id == 2 and survey_type == "checklist":
            return "Education Officer"
        if question_id == 1 and survey_type == "pip":
            return "John Doe"
        return "Sample text response"

    if qtype == "date":
        today = today or datetime.now()
        past = today - timedelta(days=30 * rng.randint(0, 2))
        return past.date().isoformat()

    if qtype == "gps":
        lat = 5.5 + rng.random() * 5.5
        lng = -3.5 + rng.random() * 3
        return f"{lat:.6f},{lng:.6f}"

    if qtype == "multiselect":
        if question_id == 21:
            languages = ["English", "Twi"]
            if rng.random() > 0.7:
                languages.append("Ga")
            if rng.random() > 0.8:
                languages.append("Ewe")
            return ",".join(languages)
        return "Option A,Option B"

    return "N/A"


# ============================================================================
# DATASET
# ============================================================================

class SurveyDataset:
    """
    Roster plus survey answers, the input to the indicator calculations.

    Answers are flat records ``{id, question_id, answer, teacher_id, school,
    district, region, circuit}``; district output answers carry no teacher.
    """

    def __init__(
        self,
        teachers: List[Dict[str, Any]],
        answers_school_output: Optional[List[Dict[str, Any]]] = None,
        answers_district_output: Optional[List[Dict[str, Any]]] = None,
        answers_consolidated_checklist: Optional[List[Dict[str, Any]]] = None,
        answers_pip: Optional[List[Dict[str, Any]]] = None,
        school_dropouts: Optional[Dict[str, int]] = None,
    ):
        self.teachers = list(teachers)
        self.answers_school_output = answers_school_output or []
        self.answers_district_output = answers_district_output or []
        self.answers_consolidated_checklist = answers_consolidated_checklist or []
        self.answers_pip = answers_pip or []
        self.school_dropouts = school_dropouts or {}
        self.questions_school_output = QUESTIONS_SCHOOL_OUTPUT
        self.questions_district_output = QUESTIONS_DISTRICT_OUTPUT
        self.questions_consolidated_checklist = QUESTIONS_CONSOLIDATED_CHECKLIST
        self.questions_pip = QUESTIONS_PIP

    def teacher_by_id(self, teacher_id) -> Optional[Dict[str, Any]]:
        for teacher in self.teachers:
            if teacher["id"] == teacher_id:
                return teacher
        return None

    @property
    def districts(self) -> List[str]:
        return unique_values(self.teachers, "district")

    @property
    def schools(self) -> List[str]:
        return unique_values(self.teachers, "school")


class MockDatabase(SurveyDataset):
    """Seeded in-memory fixtures mirroring the mobile app's tables."""

    def __init__(self, seed: int = BaseConfig.RTP_MOCK_SEED, today: Optional[datetime] = None):
        self.seed = seed
        self.rng = random.Random(seed)
        self.today = today or datetime.now()
        teachers = [dict(t) for t in TEACHERS]
        super().__init__(teachers)

        self.answers_school_output = self._teacher_answers(QUESTIONS_SCHOOL_OUTPUT, "school")
        self.answers_district_output = self._district_answers()
        self.answers_consolidated_checklist = self._teacher_answers(
            QUESTIONS_CONSOLIDATED_CHECKLIST, "checklist"
        )
        self.answers_pip = self._teacher_answers(QUESTIONS_PIP, "pip")
        self.school_dropouts = self._school_dropouts()

    def _answer_record(self, record_id, question, survey_type, context):
        answer = generate_mock_answer(self.rng, question, survey_type, context, self.today)
        record = {
            "id": record_id,
            "question_id": question["id"],
            "teacher_id": context.get("id") if survey_type != "district" else None,
            "school": context.get("school"),
            "district": context.get("district"),
            "region": context.get("region"),
            "circuit": context.get("circuit"),
            "answer": answer,
        }
        if survey_type == "checklist" and question["id"] == 18 and answer == "Yes":
            record["has_upload"] = True
            record["upload_file_path"] = f"/uploads/development-plans/teacher-{context['id']}.pdf"
        return record

    def _teacher_answers(self, questions, survey_type):
        return [
            self._answer_record(teacher["id"] * 100 + question["id"], question, survey_type, teacher)
            for teacher in self.teachers
            for question in questions
        ]

    def _district_answers(self):
        answers = []
        for index, district in enumerate(self.districts):
            region = next((t["region"] for t in self.teachers if t["district"] == district), "")
            context = {"district": district, "region": region}
            for question in QUESTIONS_DISTRICT_OUTPUT:
                answers.append(
                    self._answer_record(index * 100 + question["id"], question, "district", context)
                )
        return answers

    def _school_dropouts(self) -> Dict[str, int]:
        enrolled = {school: 0 for school in self.schools}
        for answer in self.answers_school_output:
            if answer["question_id"] in (12, 13):
                enrolled[answer["school"]] += int(answer["answer"] or 0)
        # 3-8% of enrolment
        return {
            school: round(total * (0.03 + self.rng.random() * 0.05))
            for school, total in enrolled.items()
        }


@lru_cache(maxsize=8)
def get_mock_database(seed: int = BaseConfig.RTP_MOCK_SEED) -> MockDatabase:
    return MockDatabase(seed)
