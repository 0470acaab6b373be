import os
import pytest

import ptmp


def write_config(directory, contents):
    path = os.path.join(str(directory), 'client.json')
    with open(path, 'wb') as output:
        output.write(ptmp.json.dumps(contents))


def test_defaults(isolated_config):

    config = ptmp.config.load()

    assert config['address'] == '127.0.0.1'
    assert config['port'] == 39000
    assert config['transport'] == 'tcp'
    assert config['username'] is None
    assert config['strict'] == False
    assert 'keep_alive_period' in config

    with pytest.raises(KeyError):
        config['no such setting']

    # Cached until explicitly reloaded.
    assert ptmp.config.load() is config
    assert ptmp.config.load(reload=True) is not config


def test_file(isolated_config):

    write_config(isolated_config, {'port': 1234, 'username': 'net.example.test'})
    config = ptmp.config.load(reload=True)

    assert config['port'] == 1234
    assert config['username'] == 'net.example.test'
    assert config['address'] == '127.0.0.1'


def test_environment(isolated_config, monkeypatch):

    write_config(isolated_config, {'port': 1234, 'transport': 'tcp'})
    monkeypatch.setenv('PTMP_PORT', '4321')
    monkeypatch.setenv('PTMP_TRANSPORT', 'zmq')
    monkeypatch.setenv('PTMP_STRICT', 'yes')
    monkeypatch.setenv('PTMP_TIMEOUT', '2.5')

    config = ptmp.config.load(reload=True)

    assert config['port'] == 4321
    assert config['transport'] == 'zmq'
    assert config['strict'] == True
    assert config['timeout'] == 2.5


def test_invalid(isolated_config, monkeypatch):

    monkeypatch.setenv('PTMP_PORT', 'many')
    with pytest.raises(ValueError):
        ptmp.config.load(reload=True)

    monkeypatch.delenv('PTMP_PORT')
    monkeypatch.setenv('PTMP_TRANSPORT', 'carrier-pigeon')
    with pytest.raises(ValueError):
        ptmp.config.load(reload=True)

    monkeypatch.delenv('PTMP_TRANSPORT')
    write_config(isolated_config, {'colour': 'blue'})
    with pytest.raises(ValueError):
        ptmp.config.load(reload=True)

    write_config(isolated_config, [1, 2, 3])
    with pytest.raises(ValueError):
        ptmp.config.load(reload=True)


def test_directory(isolated_config, monkeypatch):

    assert ptmp.config.directory() == str(isolated_config)

    with pytest.raises(ValueError):
        ptmp.config.directory('relative/path')

    monkeypatch.setattr(ptmp.config.directory, 'found', None)
    monkeypatch.setenv('PTMP_HOME', '/somewhere/else')
    assert ptmp.config.directory() == '/somewhere/else'

    monkeypatch.setattr(ptmp.config.directory, 'found', None)
    monkeypatch.delenv('PTMP_HOME')
    monkeypatch.setenv('HOME', '/home/tester')
    assert ptmp.config.directory() == os.path.join('/home/tester', '.ptmp')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
