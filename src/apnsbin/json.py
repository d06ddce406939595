''' Wrapper module to select the most performant available library to encode
    notification payloads, the equivalent of :func:`json.dumps` and
    :func:`json.loads`.
'''

# msgspec is an optional extra; orjson is the declared dependency. The
# standard library is only reached in a stripped-down environment.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# The gateway wants compact bytes on the wire. msgspec and orjson both return
# compact bytes from their encoders; the standard library needs coaxing.

def json_dumps(thing):
    return json.dumps(thing, separators=(',', ':')).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
else:
    dumps = json_dumps
    loads = json.loads

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
