from .masking import mask_identifier, mask_token

__all__ = ["mask_identifier", "mask_token"]
