import mock
import pytest

from watchrun import cli
from watchrun.config import CommandSpec
from watchrun.watcher.shared import WatchError


@pytest.fixture
def run_with_reloader(monkeypatch):
    runner = mock.Mock(return_value=0)
    monkeypatch.setattr(cli.reloader, 'run_with_reloader', runner)
    monkeypatch.setattr(cli, 'install_signal_handlers', mock.Mock())
    return runner


def test_runs_reloader_with_parsed_config(tmpdir, run_with_reloader):
    rc = cli.main(['--path', tmpdir.strpath, '--cmd', 'go build ./...'])

    assert rc == 0
    config, cancel = run_with_reloader.call_args[0]
    assert config.root_path == tmpdir.strpath
    assert config.command == CommandSpec('go', ('build', './...'))
    assert config.poll_interval == 1.0
    assert not cancel.is_set()


def test_options_are_passed_through(tmpdir, run_with_reloader):
    cli.main(['--path', tmpdir.strpath, '--cmd', 'make',
              '--interval', '0.25', '--grace-period', '2',
              '--run-on-start'])

    config = run_with_reloader.call_args[0][0]
    assert config.poll_interval == 0.25
    assert config.grace_period == 2.0
    assert config.run_on_start


def test_empty_command_exits_non_zero(tmpdir, run_with_reloader, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['--path', tmpdir.strpath, '--cmd', '  '])

    assert excinfo.value.code == 2
    assert 'command is empty' in capsys.readouterr().err
    assert not run_with_reloader.called


def test_missing_path_exits_non_zero(tmpdir, run_with_reloader, capsys):
    missing = tmpdir.join('missing').strpath
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['--path', missing, '--cmd', 'make'])

    assert excinfo.value.code == 2
    assert missing in capsys.readouterr().err
    assert not run_with_reloader.called


def test_required_options(run_with_reloader):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['--cmd', 'make'])
    assert excinfo.value.code == 2


def test_unknown_backend_rejected(tmpdir, run_with_reloader):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['--path', tmpdir.strpath, '--cmd', 'make',
                  '--backend', 'inotify'])
    assert excinfo.value.code == 2


def test_initial_walk_failure_exits_one(tmpdir, run_with_reloader):
    run_with_reloader.side_effect = WatchError('could not read /nope')

    rc = cli.main(['--path', tmpdir.strpath, '--cmd', 'make'])

    assert rc == 1


def test_signal_handler_sets_cancel(monkeypatch):
    handlers = {}
    monkeypatch.setattr(cli.signal, 'signal',
                        lambda signum, handler: handlers.update(
                            {signum: handler}))
    cancel = mock.Mock()

    cli.install_signal_handlers(cancel)
    handlers[cli.signal.SIGINT](cli.signal.SIGINT, None)

    cancel.set.assert_called_once_with()
