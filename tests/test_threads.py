import pytest
from PyQt6.QtCore import QCoreApplication

from tidydock.docker_api import FixtureDockerService, RequestTimedOut
from tidydock.gui import EngineOperationThread


@pytest.fixture(scope='module', autouse=True)
def qt_app():
    return QCoreApplication.instance() or QCoreApplication([])


class RecordingService(FixtureDockerService):
    """Fixture service that remembers the order of calls"""

    def __init__(self, fail_with=None):
        super().__init__()
        self.calls = []
        self.fail_with = fail_with

    async def fetch_containers(self):
        self.calls.append('fetch_containers')
        return await super().fetch_containers()

    async def stop_container(self, container_id):
        self.calls.append(f'stop_container:{container_id}')
        if self.fail_with:
            raise self.fail_with


def run_thread(thread):
    statuses, results, finished = [], [], []
    thread.status_signal.connect(statuses.append)
    thread.result_signal.connect(results.append)
    thread.finished_signal.connect(lambda ok, message: finished.append((ok, message)))
    # run() in the test thread; signals are delivered directly
    thread.run()
    return statuses, results, finished


@pytest.mark.parametrize('operation', ['images', 'containers', 'networks', 'disk_usage'])
def test_read_operations(operation):
    statuses, results, finished = run_thread(EngineOperationThread(FixtureDockerService(), operation))

    assert statuses == ['Loading']
    assert len(results) == 1
    assert finished == [(True, '')]


def test_mutation_refreshes_after_completion():
    service = RecordingService()
    statuses, results, finished = run_thread(EngineOperationThread(service, 'stop', '8dfafdbc3a40'))

    assert service.calls == ['stop_container:8dfafdbc3a40', 'fetch_containers']
    assert statuses == ['Stopping container']
    assert [c.name for c in results[0]] == ['web-nginx', 'cache-redis']
    assert finished == [(True, 'Container 8dfafdbc3a40 stopped')]


def test_failed_mutation_skips_refresh():
    service = RecordingService(fail_with=RequestTimedOut(3.0))
    _, results, finished = run_thread(EngineOperationThread(service, 'stop', 'abc'))

    assert service.calls == ['stop_container:abc']
    assert results == []
    assert finished == [(False, 'Request timed out after 3s.')]


def test_unknown_operation():
    with pytest.raises(ValueError, match='Unknown operation'):
        EngineOperationThread(FixtureDockerService(), 'prune')


def test_mutation_without_target():
    with pytest.raises(ValueError, match='requires a target id'):
        EngineOperationThread(FixtureDockerService(), 'delete_image')
