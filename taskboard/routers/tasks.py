import logging
from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from taskboard import config
from taskboard.database import get_db
from taskboard.models.task import Task, TaskStatus
from taskboard.models.user import User
from taskboard.schemas.task import TaskCreate, TaskDetail, TaskEnvelope, TaskPage, TaskUpdate
from taskboard.utils.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

# largest value a 64-bit signed INTEGER column or OFFSET accepts
SQL_INT_MAX = 2**63 - 1
MAX_PAGE = SQL_INT_MAX // config.MAX_TASKS_PER_PAGE


def _per_page(per_page: Optional[int] = Query(None, ge=1)) -> int:
    if per_page is None:
        return config.TASKS_PER_PAGE
    if per_page > config.MAX_TASKS_PER_PAGE:
        return config.MAX_TASKS_PER_PAGE
    return per_page


def get_owned_task(task_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> Task:
    """Load a task and check it belongs to the caller."""
    task = db.get(Task, task_id) if 0 < task_id <= SQL_INT_MAX else None
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if task.user_id != current_user.id:
        logger.warning("User %s denied access to task %s", current_user.id, task_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return task


def paginate(request: Request, query, page: int, per_page: int) -> dict:
    total = query.count()
    last_page = max(ceil(total / per_page), 1)
    items = query.limit(per_page).offset((page - 1) * per_page).all()

    def page_url(n):
        return str(request.url.include_query_params(page=n))

    first_item = (page - 1) * per_page + 1 if items else None
    return {
        "data": items,
        "meta": {
            "current_page": page,
            "last_page": last_page,
            "per_page": per_page,
            "total": total,
            "from": first_item,
            "to": first_item + len(items) - 1 if items else None,
        },
        "links": {
            "first": page_url(1),
            "last": page_url(last_page),
            "prev": page_url(page - 1) if page > 1 else None,
            "next": page_url(page + 1) if page < last_page else None,
        },
    }


@router.get("", response_model=TaskPage)
def list_tasks(
    request: Request,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    per_page: int = Depends(_per_page),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    q: Optional[str] = Query(None, description="Search by title"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Newest-first page of the caller's tasks."""
    query = db.query(Task).filter(Task.user_id == current_user.id)
    if status_filter is not None:
        query = query.filter(Task.status == status_filter)
    if q:
        query = query.filter(Task.title.icontains(q, autoescape=True))
    query = query.order_by(Task.created_at.desc(), Task.id.desc())
    return paginate(request, query, page, per_page)


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    new = Task(
        user_id=current_user.id,
        title=task.title,
        description=task.description,
        status=task.status,
    )
    db.add(new)
    db.commit()
    db.refresh(new)
    logger.info("User %s created task %s", current_user.id, new.id)
    return {"task": new, "message": "Task created successfully"}


@router.get("/{task_id}", response_model=TaskDetail)
def read_task(task: Task = Depends(get_owned_task)):
    return {"task": task}


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskEnvelope)
def update_task(changes: TaskUpdate, task: Task = Depends(get_owned_task), db: Session = Depends(get_db)):
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(task, key, value)
    db.commit()
    db.refresh(task)
    logger.info("User %s updated task %s", task.user_id, task.id)
    return {"task": task, "message": "Task updated successfully"}


@router.delete("/{task_id}")
def delete_task(task: Task = Depends(get_owned_task), db: Session = Depends(get_db)):
    task_id, owner_id = task.id, task.user_id
    db.delete(task)
    db.commit()
    logger.info("User %s deleted task %s", owner_id, task_id)
    return {"message": "Task deleted successfully"}
