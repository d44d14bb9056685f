from appraisal_manager.core.logging import setup_logging
from appraisal_manager.database import SessionLocal, init_db
from appraisal_manager.services.repair import fix_missing_managers


def main():
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        result = fix_missing_managers(db)
        print(f"Fixed {result.fixed} appraisals ({result.errors} errors)")
    finally:
        db.close()


if __name__ == "__main__":
    main()
