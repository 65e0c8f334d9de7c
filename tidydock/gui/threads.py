"""
Background threads for engine operations

Each thread runs one operation on its own asyncio event loop so the Qt
event loop never waits on the Docker socket.
"""

import asyncio
import logging
from typing import Optional

from PyQt6.QtCore import QThread, pyqtSignal

from ..docker_api import DockerException, DockerService

logger = logging.getLogger(__name__)

# operation -> service method
READ_OPERATIONS = {
    'images': 'fetch_images',
    'containers': 'fetch_containers',
    'networks': 'fetch_networks',
    'disk_usage': 'fetch_disk_usage',
}

# operation -> (service method, refresh method, status message, success message)
MUTATIONS = {
    'delete_image': ('delete_image', 'fetch_images', 'Removing image', 'Image {id} removed'),
    'delete_container': ('delete_container', 'fetch_containers', 'Removing container', 'Container {id} removed'),
    'start': ('start_container', 'fetch_containers', 'Starting container', 'Container {id} started'),
    'stop': ('stop_container', 'fetch_containers', 'Stopping container', 'Container {id} stopped'),
}


class EngineOperationThread(QThread):
    """Thread for async engine operations (list, delete, start, stop)"""
    status_signal = pyqtSignal(str)  # Status message while working
    result_signal = pyqtSignal(object)  # Records of the (refreshed) list
    finished_signal = pyqtSignal(bool, str)  # Success, message

    def __init__(self, service: DockerService, operation: str, target_id: Optional[str] = None):
        super().__init__()
        if operation not in READ_OPERATIONS and operation not in MUTATIONS:
            raise ValueError(f"Unknown operation: {operation}")
        if operation in MUTATIONS and not target_id:
            raise ValueError(f"Operation {operation} requires a target id")
        self.service = service
        self.operation = operation
        self.target_id = target_id

    def run(self):
        """Run engine operation"""
        try:
            result, message = asyncio.run(self._execute())
        except DockerException as e:
            logger.error(f"Engine operation {self.operation} failed: {e}")
            self.finished_signal.emit(False, str(e))
            return
        except Exception as e:
            logger.exception(f"Unexpected error in engine operation {self.operation}")
            self.finished_signal.emit(False, str(e))
            return

        self.result_signal.emit(result)
        self.finished_signal.emit(True, message)

    async def _execute(self):
        if self.operation in READ_OPERATIONS:
            self.status_signal.emit('Loading')
            fetch = getattr(self.service, READ_OPERATIONS[self.operation])
            return await fetch(), ''

        method, refresh, status, success = MUTATIONS[self.operation]
        self.status_signal.emit(status)
        await getattr(self.service, method)(self.target_id)
        # Refresh only after the mutation has completed
        records = await getattr(self.service, refresh)()
        return records, success.format(id=self.target_id)
