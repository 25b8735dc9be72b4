from tasks.policy import permitted_task_actions


def task_to_dict(task, actor=None):
    data = {
        "id": task.pk,
        "title": task.title,
        "description": task.description,
        "assignee_id": task.assignee_id,
        "creator_id": task.creator_id,
        "deadline": task.deadline.isoformat(),
        "status": task.status,
        "priority": task.priority,
        "score": task.score,
    }

    if actor is not None:
        data["permissions"] = sorted(
            action.value for action in permitted_task_actions(actor, task)
        )

    return data
