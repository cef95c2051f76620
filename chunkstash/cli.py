'''
Command line interface: hide, show and remove messages stored as chunks of a PNG file.

 $ chunkstash encode image.png ruSt 'this is a secret'
 $ chunkstash decode image.png ruSt
 this is a secret
 $ chunkstash remove image.png ruSt
 $ chunkstash print image.png

Set the environment variable DEBUG to see what happens under the hood.
'''
import argparse
import logging
import os
import sys

from chunkstash.exceptions import StashException
from chunkstash.images.png import PNGFile, PNGChunk, PNGChunkType
from chunkstash.streams import read_all_bytes, write_all_bytes


logger = logging.getLogger(__name__)


def encode(args):
    png = PNGFile(read_all_bytes(args.path))
    chunk = PNGChunk(
        type=PNGChunkType.from_text(args.chunk_type),
        data=args.message.encode('utf-8', 'surrogateescape'),
    )
    png.append_chunk(chunk)

    output = args.output if args.output is not None else args.path
    write_all_bytes(output, png.pack())
    logger.info(f'message stored in chunk {chunk.type} of \'{output}\'')


def decode(args):
    png = PNGFile(read_all_bytes(args.path))
    chunk = png.chunk_by_type(args.chunk_type)

    if chunk is None:
        print('No secret found :(')
        return

    print(chunk.data_as_text())


def remove(args):
    png = PNGFile(read_all_bytes(args.path))
    chunk = png.remove_chunk(args.chunk_type)
    write_all_bytes(args.path, png.pack())
    logger.info(f'removed chunk {chunk.type} ({chunk.length} bytes) from \'{args.path}\'')


def dump(args):
    png = PNGFile(read_all_bytes(args.path))
    print(png)


def get_parser():
    parser = argparse.ArgumentParser(prog='chunkstash', description='Hide messages into PNG files')
    subparsers = parser.add_subparsers(dest='command', required=True)

    parser_encode = subparsers.add_parser('encode', help='encodes a secret message into the given PNG file')
    parser_encode.add_argument('path')
    parser_encode.add_argument('chunk_type')
    parser_encode.add_argument('message')
    parser_encode.add_argument('-o', '--output', help='write the result here instead of overwriting the file')
    parser_encode.set_defaults(func=encode)

    parser_decode = subparsers.add_parser('decode', help='tries to decode a secret message from the given PNG file')
    parser_decode.add_argument('path')
    parser_decode.add_argument('chunk_type')
    parser_decode.set_defaults(func=decode)

    parser_remove = subparsers.add_parser('remove', help='tries to remove a secret message from the given PNG file')
    parser_remove.add_argument('path')
    parser_remove.add_argument('chunk_type')
    parser_remove.set_defaults(func=remove)

    parser_print = subparsers.add_parser('print', help='prints the chunks of the given PNG file')
    parser_print.add_argument('path')
    parser_print.set_defaults(func=dump)

    return parser


def main(argv=None):
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    args = get_parser().parse_args(argv)

    try:
        args.func(args)
    except StashException as e:
        logger.debug('command \'%s\' failed' % args.command, exc_info=True)
        print(f'error: {e}', file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
