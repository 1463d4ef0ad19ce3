from .controller import UploadController, UploadState

__all__ = ['UploadController', 'UploadState']
