import logging

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .database import open_store
from .errors import AuthError, ConflictError, GradebookError, ValidationError
from .schemas import LoginIn, RosterMode, StudentIn, StudentSignup, TeacherSignup
from .service import Gradebook

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Gradebook API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

book = Gradebook(open_store(config.STORAGE, config.DATA_DIR))

# ----------------------------- Helpers -----------------------------

def get_book() -> Gradebook:
    return book


def require_role(gb: Gradebook, role: str):
    if gb.current is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    if gb.current.role != role:
        raise HTTPException(status_code=403, detail=f"Only a {role} can do this")


def serialize_session(gb: Gradebook):
    s = gb.current
    if s is None:
        return None
    doc = {"role": s.role, "user": s.user}
    if s.student is not None:
        doc["student"] = s.student.public()
    return doc


STATUS_BY_ERROR = {
    ValidationError: 422,
    ConflictError: 409,
    AuthError: 401,
}


@app.exception_handler(GradebookError)
async def gradebook_error(request: Request, exc: GradebookError):
    status = STATUS_BY_ERROR.get(type(exc), 400)
    return JSONResponse(status_code=status, content={"detail": exc.message, "reason": exc.reason.value})

# ----------------------------- Basic -----------------------------
@app.get("/")
def root():
    return {"status": "ok", "service": "gradebook"}

# ----------------------------- Auth -----------------------------
@app.post("/auth/login")
def login(payload: LoginIn, gb: Gradebook = Depends(get_book)):
    gb.login(payload.role, payload.user, payload.password)
    return {"session": serialize_session(gb)}

@app.post("/auth/signup/teacher")
def signup_teacher(payload: TeacherSignup, gb: Gradebook = Depends(get_book)):
    gb.signup("teacher", payload.model_dump(by_alias=True))
    return {"ok": True}

@app.post("/auth/signup/student")
def signup_student(payload: StudentSignup, gb: Gradebook = Depends(get_book)):
    gb.signup("student", payload.model_dump(by_alias=True))
    return {"ok": True}

@app.post("/auth/logout")
def logout(gb: Gradebook = Depends(get_book)):
    gb.logout()
    return {"ok": True}

@app.get("/session")
def current_session(gb: Gradebook = Depends(get_book)):
    return {"session": serialize_session(gb)}

# ----------------------------- Students -----------------------------
@app.post("/students")
def add_student(payload: StudentIn, gb: Gradebook = Depends(get_book)):
    require_role(gb, "teacher")
    record = gb.add_or_update_student(
        payload.id, payload.name, payload.branch, payload.year, payload.section, payload.marks
    )
    return {"student": record.public()}

@app.delete("/students/{student_id}")
def delete_student(student_id: str, gb: Gradebook = Depends(get_book)):
    require_role(gb, "teacher")
    gb.delete_student(student_id)
    return {"ok": True}

@app.get("/students")
def roster(mode: RosterMode = Query("all"), gb: Gradebook = Depends(get_book)):
    if gb.current is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    rows = gb.project(mode)
    return {
        "mode": mode,
        "students": [
            {"rank": r.rank, "removable": r.removable, **r.record.public()} for r in rows
        ],
    }

@app.get("/student/report")
def student_report(gb: Gradebook = Depends(get_book)):
    require_role(gb, "student")
    return {"report": gb.student_report().model_dump(exclude_none=True)}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
