''' Wrapper module around msgspec providing the equivalent of
    :func:`json.loads` and :func:`json.dumps`. Like msgspec itself, the
    :func:`dumps` method here returns bytes, not a string.
'''

import msgspec


encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

dumps = encoder.encode
loads = decoder.decode

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
