from .catalog import MOCK_DRIVE_CONTENTS, MockDriveCatalog, SourceCatalog

__all__ = ["MOCK_DRIVE_CONTENTS", "MockDriveCatalog", "SourceCatalog"]
