from fastapi import BackgroundTasks, Request


def get_background_tasks(request: Request, background_tasks: BackgroundTasks) -> BackgroundTasks:
    """
    Background tasks that also run when the request fails.

    FastAPI only runs background tasks attached to the response the route returns, so the error handler in main
    picks these up from request.state and attaches them to the error response.
    """
    request.state.background_tasks = background_tasks
    return background_tasks
