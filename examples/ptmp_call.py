#!/usr/bin/env python3
"""
Issue a single IPC call against a PTMP server and print the return values
as JSON. The whole session is run: negotiation, authentication, the call,
and a disconnect.

Arguments to the call are given as TYPE:VALUE, for example::

    ptmp_call.py -u net.example.ptmptest -p secret appWindow.writeToPT qstring:hello

The password is sent as the digest as-is; no digest is computed here.
"""

import logging
import sys

import ptmp


def parse_argument(text):
    """Turn TYPE:VALUE into an IpcData; a bare VALUE is a string."""

    type_name, separator, value = text.partition(':')

    if separator == '':
        return ptmp.IpcData.string(text)

    try:
        type = ptmp.IpcType[type_name.upper()]
    except KeyError:
        raise ValueError(f"unknown argument type: {type_name!r}") from None

    if type == ptmp.IpcType.BOOL:
        return ptmp.IpcData.boolean(value.lower() in ('1', 'true', 'yes'))

    return ptmp.IpcData(type, value)


def main():
    """Main entry point for the example."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Run one PTMP IPC call and print the results'
    )
    parser.add_argument(
        'call_name',
        help='Dotted IPC call path, such as appWindow.getVersion'
    )
    parser.add_argument(
        'arguments', nargs='*',
        help='Call arguments as TYPE:VALUE (default type: string)'
    )
    parser.add_argument('-a', '--address', default=None, help='Server address')
    parser.add_argument('--port', type=int, default=None, help='Server port')
    parser.add_argument('-u', '--username', default=None, help='Authentication username')
    parser.add_argument('-p', '--password', default='', help='Authentication digest')
    parser.add_argument('-t', '--transport', choices=ptmp.transport.backends, default=None)
    parser.add_argument('-v', '--verbose', action='count', default=0)

    args = parser.parse_args()

    if args.verbose > 1:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    try:
        call_args = [parse_argument(text) for text in args.arguments]
    except ValueError as e:
        parser.error(str(e))

    try:
        session = ptmp.connect(args.address, args.port,
                               username=args.username,
                               digest=args.password,
                               backend=args.transport)
    except (ptmp.ProtocolError, ptmp.transport.TransportError) as e:
        print(f"connection failed: {e}", file=sys.stderr)
        return 1

    with session:
        response = session.call(args.call_name, *call_args)

    result = dict()
    result['call_id'] = response.call_id
    result['complete'] = response.complete
    result['rets'] = [
        {'type': ret.type.name, 'value': ret.python()} for ret in response.rets
    ]

    print(ptmp.json.dumps(result).decode())
    return 0


if __name__ == '__main__':
    sys.exit(main())
