from composer.infrastructure.persistence.s3.client import S3Client

__all__ = ["S3Client"]
