from appraisal_manager.core.logging import setup_logging
from appraisal_manager.database import SessionLocal, init_db
from appraisal_manager.services.appraisal_workflow import recalculate_all_ratings


def main():
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        result = recalculate_all_ratings(db)
        print(f"Recalculated {result.succeeded} appraisals ({result.failed} failed)")
    finally:
        db.close()


if __name__ == "__main__":
    main()
