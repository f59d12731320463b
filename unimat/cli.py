import os
import sys
import argparse
from typing import Optional
from .errors import CipherError, IoFailure
from .keys import CipherKey, key_decimals
from .params import CipherParams, DEFAULT_CHUNK_SIZE, DEFAULT_ITERATIONS, DEFAULT_OMEGA, PRINT_LIMIT, bcolors
from .public_api import generate_key_file, encrypt_file, decrypt_file

# -----------------------------
# CLI Main with Interactive Menu
# -----------------------------
def show_key(key: CipherKey):
    if key.n > PRINT_LIMIT:
        return
    print(f"{bcolors.GREY}{key.kind} key, n={key.n}{bcolors.ENDC}")
    print(key.matrix)
    print("")
    print(key.encryption_matrix().round(key_decimals(key.n) + 1))

def menu_generate_key():
    key_path = input("Key filename (default key.bin): ").strip() or "key.bin"
    chunk_size = int(input(f"Chunk size (default {DEFAULT_CHUNK_SIZE}): ").strip() or DEFAULT_CHUNK_SIZE)
    integer_mode = (input("Whole-number key (y/n) [n]: ").strip().lower() or "n") == "y"
    show_key(generate_key_file(key_path, CipherParams(chunk_size=chunk_size, integer_mode=integer_mode)))

def menu_encrypt():
    key_path = input("Key filename (default key.bin): ").strip() or "key.bin"
    file_path = input("File to encrypt (.txt or .wav): ").strip()
    if not os.path.exists(file_path):
        print("File not found.")
        return
    encrypt_file(key_path, file_path)

def menu_decrypt(direct: bool):
    key_path = input("Key filename (default key.bin): ").strip() or "key.bin"
    file_path = input("File to decrypt (.txt or .wav): ").strip()
    params = CipherParams()
    if not direct:
        params.iterations = int(input(f"Iterations (default {DEFAULT_ITERATIONS}): ").strip() or DEFAULT_ITERATIONS)
    if not os.path.exists(file_path):
        print("File not found.")
        return
    decrypt_file(key_path, file_path, direct, params)

def run_menu():
    while True:
        print(f"{bcolors.OKCYAN}UNIMAT CLI - block cipher over unimodular matrices{bcolors.ENDC}")
        print(f"{bcolors.OKCYAN}Encrypt: y = L U x. Decrypt: triangular substitution or relaxation.{bcolors.ENDC}")
        print("")
        print(f"{bcolors.BOLD}1){bcolors.ENDC} Generate key")
        print(f"{bcolors.BOLD}2){bcolors.ENDC} Encrypt file")
        print(f"{bcolors.BOLD}3){bcolors.ENDC} Decrypt file (direct)")
        print(f"{bcolors.GREY}4) Decrypt file (iterative, approximate){bcolors.ENDC}")
        print(f"{bcolors.BOLD}0){bcolors.ENDC} Exit")
        choice = input(f"{bcolors.BOLD}Choice: {bcolors.ENDC}").strip()
        try:
            match choice:
                case "0":
                    break
                case "1":
                    menu_generate_key()
                case "2":
                    menu_encrypt()
                case "3":
                    menu_decrypt(direct=True)
                case "4":
                    menu_decrypt(direct=False)
                case _:
                    print("Invalid choice")
        except (CipherError, ValueError) as e:
            print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UNIMAT CLI - matrix block cipher for text and 16-bit WAV files")
    parser.add_argument("--verbose", action="store_true", help="Print intermediate values")
    parser.add_argument("--workers", type=int, default=None, help="Thread pool size")
    subparsers = parser.add_subparsers(dest="command")

    gen_key_parser = subparsers.add_parser("gen_key", help="Generate a key matrix")
    gen_key_parser.add_argument("--key_path", required=True, help="Output key file")
    gen_key_parser.add_argument("--chunk_size", type=int, required=True, help="Key dimension n")
    gen_key_parser.add_argument("--integer", action="store_true", help="Whole-number key entries")

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a .txt or .wav file")
    encrypt_parser.add_argument("--key_path", required=True, help="Key file")
    encrypt_parser.add_argument("--file_path", required=True, help="File to encrypt")

    direct_parser = subparsers.add_parser("decrypt_direct", help="Decrypt by triangular substitution")
    direct_parser.add_argument("--key_path", required=True, help="Key file")
    direct_parser.add_argument("--file_path", required=True, help="File to decrypt")

    iterative_parser = subparsers.add_parser("decrypt_iterative", help="Decrypt by successive over-relaxation")
    iterative_parser.add_argument("--key_path", required=True, help="Key file")
    iterative_parser.add_argument("--file_path", required=True, help="File to decrypt")
    iterative_parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS, help="Relaxation sweeps")
    iterative_parser.add_argument("--omega", type=float, default=DEFAULT_OMEGA, help="Relaxation factor")
    return parser

def main(argv: Optional[list] = None):
    args = build_parser().parse_args(argv)
    params = CipherParams(verbose=args.verbose, workers=args.workers)
    try:
        match args.command:
            case "gen_key":
                params.chunk_size = args.chunk_size
                params.integer_mode = args.integer
                show_key(generate_key_file(args.key_path, params))
            case "encrypt":
                encrypt_file(args.key_path, args.file_path, params)
            case "decrypt_direct":
                decrypt_file(args.key_path, args.file_path, True, params)
            case "decrypt_iterative":
                params.iterations = args.iterations
                params.omega = args.omega
                decrypt_file(args.key_path, args.file_path, False, params)
            case None:
                run_menu()
    except IoFailure as e:
        print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e, file=sys.stderr)
        sys.exit(2)
    except (CipherError, ValueError) as e:
        print(f"{bcolors.FAIL}ERROR:{bcolors.ENDC}", e, file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
