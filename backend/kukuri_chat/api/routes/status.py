from fastapi import APIRouter

router = APIRouter(tags=["Status"])


@router.get("/status")
def status():
    return {"status": "ok", "message": "Server is running"}
