from dataclasses import dataclass


@dataclass(frozen=True)
class ExportProgress:
    percentage: int
    message: str
    processed_records: int = 0
    total_records: int = 0

    def __post_init__(self):
        if self.percentage < 0 or self.percentage > 100:
            raise ValueError("Progress percentage must be between 0 and 100")
        if self.processed_records < 0 or self.total_records < 0:
            raise ValueError("Record counts cannot be negative")
        if self.total_records > 0 and self.processed_records > self.total_records:
            raise ValueError("Processed records cannot exceed total records")

    @classmethod
    def start(cls, message: str = "Export started") -> "ExportProgress":
        return cls(percentage=0, message=message)

    @classmethod
    def processing(cls, processed: int, total: int, message: str = None) -> "ExportProgress":
        percentage = round(processed / total * 100) if total > 0 else 0
        return cls(
            percentage=min(100, percentage),
            message=message or f"Processing {processed} of {total} records",
            processed_records=processed,
            total_records=total,
        )

    @classmethod
    def completed(cls, total: int, message: str = "Export completed") -> "ExportProgress":
        return cls(percentage=100, message=message, processed_records=total, total_records=total)

    def advance(self, records: int) -> "ExportProgress":
        processed = self.processed_records + records
        if self.total_records > 0:
            processed = min(processed, self.total_records)
        return ExportProgress.processing(processed, self.total_records)

    def is_complete(self) -> bool:
        return self.percentage == 100

    def to_dict(self) -> dict:
        return {
            "percentage": self.percentage,
            "message": self.message,
            "processed_records": self.processed_records,
            "total_records": self.total_records,
        }
